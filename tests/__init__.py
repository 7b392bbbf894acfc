"""
Test Package

Contains unit tests for all modules.
Run with: pytest tests/ -v

Test files should follow the pattern:
    test_<module_name>.py

Example:
    tests/test_scales.py      - Tests for fretboard/rules/scale_library.py
    tests/test_fallback.py    - Tests for fretboard/rules/fallback.py
    tests/test_cli.py         - Tests for fretboard/app/cli.py
"""
