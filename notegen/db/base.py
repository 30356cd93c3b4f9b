# /notegen/db/base.py

# Central registry for all SQLAlchemy models. Importing them here guarantees
# that Base.metadata knows every table before create_all() runs at startup.

from .base_class import Base

from .models.user_models import User
from .models.generation_models import Generation
