from tikentoken.cli import app

app(prog_name="tikentoken")
