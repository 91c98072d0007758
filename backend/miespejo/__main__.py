from miespejo.main import run

run()
