def main() -> int:
    """Entry point for the command line tool.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    from ojtech_resume.cli import main as cli_main

    return cli_main()
