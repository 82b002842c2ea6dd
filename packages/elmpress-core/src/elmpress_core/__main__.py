from elmpress_core.cli import app

app()
