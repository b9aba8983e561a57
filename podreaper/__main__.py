from podreaper.cli import app

app()
