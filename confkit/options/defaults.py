"""Option table of the project configured by confkit."""

from confkit.options.model import OptionModel

OPTIMIZE = "optimize"
OPTIMIZE_CXX = "optimize-cxx"
MANAGE_SUBMODULES = "manage-submodules"
FAST_MAKE = "fast-make"
CLANG = "clang"
STRICT_SUBMODULE_CONFIGURE = "strict-submodule-configure"
LOCAL_RUST_ROOT = "local-rust-root"


def default_option_model() -> OptionModel:
    """Create an OptionModel with every option the configure run understands."""
    model = OptionModel()
    model.declare_boolean(OPTIMIZE, True, "build optimized rust code")
    model.declare_boolean(OPTIMIZE_CXX, True, "build optimized C++ code")
    model.declare_boolean(
        MANAGE_SUBMODULES, True, "let the build manage the git submodules"
    )
    model.declare_boolean(
        FAST_MAKE, False, "use .gitmodules as timestamp for submodule deps"
    )
    model.declare_boolean(CLANG, False, "use clang instead of gcc")
    model.declare_boolean(
        STRICT_SUBMODULE_CONFIGURE,
        False,
        "treat submodule configure failures as fatal",
    )
    model.declare_valued(LOCAL_RUST_ROOT, "", "set prefix for local rust binary")
    return model
