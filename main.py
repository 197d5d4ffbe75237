# Copyright (c) 2025 Trae AI. All rights reserved.

import typer
from trailer_helper.cli.main import app as cli_app
from trailer_helper.server.app import Server

app = typer.Typer(help="NAS Trailer Helper - Keep trailer stubs in sync with your library.")

# Add CLI commands
app.registered_commands.extend(cli_app.registered_commands)

@app.command("server")
def run_server(config_path: str = "config.yaml"):
    """
    Run the Web Server and the daily trailer schedule.
    """
    server = Server(config_path)
    server.run()

if __name__ == "__main__":
    app()
