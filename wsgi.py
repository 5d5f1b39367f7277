# wsgi.py
from touristlog import create_app

app = create_app()
