"""
레시피 DB ORM Base
- DB 테이블/컬럼명은 대문자, Python 변수는 소문자
"""
from sqlalchemy.orm import declarative_base

PostgresBase = declarative_base()
