from tensordock_cli.cli.main import app

app(prog_name="tensordock-cli")
