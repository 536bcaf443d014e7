"""
mode_counter.cli — command-line entry points.

    python -m mode_counter.cli.run_calls --help
"""
