from cleanroute import create_app

# Module-level WSGI app, served with `flask --app run run` or any WSGI server
app = create_app()

# For local development
def main() -> None:
    import os
    port = int(os.environ.get('FLASK_RUN_PORT', 5000))
    app.run(debug=True, host="127.0.0.1", port=port)


if __name__ == "__main__":
    main()
