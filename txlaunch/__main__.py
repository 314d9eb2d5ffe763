from txlaunch.cli import run

run()
