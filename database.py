from sqlmodel import Session, SQLModel, create_engine

from accountmodel.account_model import Account  # noqa: F401
from config import DATABASE_URL
from storemodel.store_model import Contact, CustomerInfo, Discount, Product  # noqa: F401

# Route functions run in the threadpool, so SQLite connections cross threads
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)


def init_db():
    SQLModel.metadata.create_all(engine)


def get_session():
    return Session(engine)
