"""
This is an extension of the default test_settings.py file that uses MySQL for
the backend. While the recipe_tagging app runs fine using SQLite, it also does
some MySQL-specific things around charset/collation settings.

For the most part, you can use test_settings.py instead (that's the default if
you just run "pytest" with no arguments).

If you need a compatible MySQL server running locally, spin one up with:
docker run --rm \
    -e MYSQL_DATABASE=test_rt_db \
    -e MYSQL_USER=test_rt_user \
    -e MYSQL_PASSWORD=test_rt_pass \
    -e MYSQL_RANDOM_ROOT_PASSWORD=true \
    -p 3306:3306 mysql:8
"""

from test_settings import *

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.mysql",
        "NAME": "rt_db",
        "USER": "test_rt_user",
        "PASSWORD": "test_rt_pass",
        "HOST": "127.0.0.1",
        "PORT": "3306",
        "OPTIONS": {
            "charset": "utf8mb4"
        }
    }
}
