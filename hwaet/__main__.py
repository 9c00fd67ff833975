from hwaet.cli.main import run

run()
