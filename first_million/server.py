#setup: pip install -e ".[test]"
#setup: flask --app first_million.app run --port 5000 --debug
#   or: python -m first_million.server

from first_million.app import create_app

app = create_app()


if __name__ == "__main__":
    app.run(port=3000, debug=True)
