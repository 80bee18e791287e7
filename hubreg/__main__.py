"""Run the hubreg CLI with `python -m hubreg`."""


def main():
    from .cli import cli

    cli()


if __name__ == "__main__":
    main()
