"""
End-to-end tests for confkit.

These run the whole configure pipeline against real source and build
trees under tmp_path, with every external program scripted by FakeRunner.
"""
