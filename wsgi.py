"""WSGI entrypoint for production deployment.

Usage with uWSGI:
    uwsgi --http :5000 --wsgi-file wsgi.py --callable app --processes 4 --threads 2

Usage with Gunicorn:
    gunicorn -w 4 -b 0.0.0.0:5000 wsgi:app

Environment variables:
    DATA_DIR=<path>               Root of the data directory (default: ./data)
    INDEX_DIR=<path>              Search index files (default: $DATA_DIR/indexes)
    RESOURCES_DIR=<path>          words.json and sentences.json (default: $DATA_DIR/resources)
    SUGGESTION_DIR=<path>         Per-language suggestion files (default: $DATA_DIR/suggestions)
    DICT_DB_PATH=<path>           SQLite dictionary (default: $DATA_DIR/dictionary.db)
    SUGGESTION_TIMEOUT_MS=<ms>    Suggestion deadline (default: 1000)
"""

from api import create_app

app = create_app()

if __name__ == "__main__":
    app.run()
