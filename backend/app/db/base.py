from sqlalchemy.orm import declarative_base

# Shared declarative base for every model
Base = declarative_base()
