from .app import main_cli_runner

main_cli_runner()
