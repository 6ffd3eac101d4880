from peewee import Proxy

# Bound to a real database by database.init at process start.
db = Proxy()
