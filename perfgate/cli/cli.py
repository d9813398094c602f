import click

from .analyze import analyze


@click.group(help="Load-test results aggregation and SLO gating.")
def perfgate():
    pass


perfgate.add_command(analyze)


def main():
    perfgate()
