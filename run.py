# Development entrypoint; use `flask --app run init-db` once before the first run.
import os

from plastic_challenge import create_app

app = create_app(os.environ.get("FLASK_CONFIG"))

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", "5000")), debug=app.config["DEBUG"])
