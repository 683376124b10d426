from argparse import ArgumentParser


def parse_args(argv=None):
    parser = ArgumentParser(description="CodeMove room server")
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="The host address to bind the server to. Overrides HOST.",
    )
    parser.add_argument(
        "--port", type=int, default=None, help="The port number to bind the server to. Overrides PORT."
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the log level. Overrides LOG_LEVEL.",
    )
    parser.add_argument(
        "--allow-mentor-reclaim",
        action="store_true",
        default=None,
        dest="allow_mentor_reclaim",
        help="""
        Let the next participant joining a room whose mentor has left become the new mentor.
        By default the mentor slot stays vacant and new joiners are students.
        """,
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=None,
        help="Enable auto-reload (development only).",
    )

    args = parser.parse_args(argv)
    return args


def overrides(args) -> dict:
    """Settings overrides for every option given on the command line."""
    return {key: value for key, value in vars(args).items() if value is not None}
