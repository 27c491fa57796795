from peewee import Proxy

# Привязывается к реальной БД в database.init.init_from_env
db = Proxy()
