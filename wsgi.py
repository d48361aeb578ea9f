"""
WSGI entry point — used by gunicorn in Procfile.
"""
import atexit

from gigfrog import create_app
from gigfrog.database import get_database

app = create_app()
atexit.register(get_database(app).dispose)

if __name__ == '__main__':
    import os
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 8080)))
