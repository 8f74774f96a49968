"""Application entry point for `flask run` and WSGI servers."""

from banana_market import create_app

app = create_app()

if __name__ == '__main__':
    app.run()
