# rms/__init__.py
import pymysql

pymysql.install_as_MySQLdb()
