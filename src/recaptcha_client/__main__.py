"""Main entry point for the recaptcha_client package."""
from recaptcha_client.cli import cli


def main():
    """Main entry point function."""
    cli()


if __name__ == "__main__":
    main()
