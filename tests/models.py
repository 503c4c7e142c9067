from datetime import datetime

from sqlalchemy import create_engine
from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.orm import declarative_base, relationship, backref, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.schema import ForeignKey

from queryopts import QueryOptsBase, EntityConfig, EntityConfigRegistry


Base = declarative_base(cls=QueryOptsBase)


class Role(Base):
    __tablename__ = 'roles'

    id = Column(Integer, primary_key=True)
    name = Column(String)

    def __repr__(self):
        return 'Role(id={}, name={!r})'.format(self.id, self.name)


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String)
    email = Column(String)
    phone = Column(String)
    age = Column(Integer)
    is_active = Column(Boolean, default=True)

    role_id = Column(ForeignKey(Role.id), nullable=True)
    role = relationship(Role, backref=backref('users'))

    created_at = Column(DateTime)
    updated_at = Column(DateTime)
    deleted_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return 'User(id={}, name={!r})'.format(self.id, self.name)


class Article(Base):
    __tablename__ = 'articles'

    id = Column(Integer, primary_key=True)
    uid = Column(Integer, ForeignKey(User.id))
    title = Column(String)

    user = relationship(User, backref=backref('articles'))

    created_at = Column(DateTime)
    deleted_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return 'Article(id={}, uid={!r}, title={!r})'.format(self.id, self.uid, self.title)


class Comment(Base):
    __tablename__ = 'comments'

    id = Column(Integer, primary_key=True)
    aid = Column(Integer, ForeignKey(Article.id))
    text = Column(String)

    article = relationship(Article, backref=backref('comments'))


class Tag(Base):
    """ A model that has no configuration, no timestamps, and no soft deletes """
    __tablename__ = 'tags'
    __entity_type__ = 'label'

    id = Column(Integer, primary_key=True)
    name = Column(String)


def make_registry():
    """ Entity configuration for the test models """
    registry = EntityConfigRegistry()
    registry.register_config('user', EntityConfig(
        searchable_columns=('name', 'email', 'phone'),
        sortable_columns=('name', 'email', 'age', 'created_at', 'updated_at'),
        default_sort=('name',),
        default_includes=('role',),
    ))
    registry.register_config('article', EntityConfig(
        searchable_columns=('title',),
        sortable_columns=('title', 'created_at'),
        default_sort=(),
        default_includes=('user', 'comments'),
    ))
    return registry.freeze()


def init_database():
    """ Init DB
    :rtype: (sqlalchemy.engine.Engine, sqlalchemy.orm.Session)
    """
    engine = create_engine('sqlite://',
                           connect_args={'check_same_thread': False},
                           poolclass=StaticPool,
                           echo=False)
    Session = sessionmaker(bind=engine)
    return engine, Session


def create_all(engine):
    """ Create all tables """
    Base.metadata.create_all(bind=engine)


def drop_all(engine):
    """ Drop all tables """
    Base.metadata.drop_all(bind=engine)


def content_samples():
    """ Generate content samples """
    day = lambda n: datetime(2020, 1, n)

    return [[
        Role(id=1, name='admin'),
        Role(id=2, name='member'),
    ], [
        User(id=1, name='john', email='john@example.com', phone='111', age=18, is_active=True, role_id=1,
             created_at=day(1), updated_at=day(10)),
        User(id=2, name='mary', email='mary@example.com', phone='222', age=20, is_active=True, role_id=2,
             created_at=day(2), updated_at=day(9)),
        User(id=3, name='johnny', email='j@other.org', phone='333', age=16, is_active=False, role_id=1,
             created_at=day(3), updated_at=day(8)),
        # Archived
        User(id=4, name='bob', email='bob@example.com', phone='john-444', age=30, is_active=True, role_id=2,
             created_at=day(4), updated_at=day(7), deleted_at=day(20)),
        User(id=5, name='alice', email='alice@example.com', phone='555', age=25, is_active=False, role_id=None,
             created_at=day(5), updated_at=day(6), deleted_at=day(21)),
    ], [
        Article(id=10, uid=1, title='Hello', created_at=day(1)),
        Article(id=11, uid=1, title='World', created_at=day(2)),
        Article(id=12, uid=2, title='Mary had a little lamb', created_at=day(3)),
        Article(id=13, uid=4, title='Written by bob', created_at=day(4)),
        # Archived
        Article(id=14, uid=2, title='Mary had a big lamb', created_at=day(5), deleted_at=day(20)),
    ], [
        Comment(id=100, aid=10, text='first'),
        Comment(id=101, aid=10, text='second'),
        Comment(id=102, aid=12, text='baa'),
    ], [
        Tag(id=1, name='python'),
        Tag(id=2, name='sql'),
    ]]


def get_empty_db():
    # Connect, create tables
    engine, Session = init_database()
    drop_all(engine)
    create_all(engine)
    return engine, Session


def get_working_db_for_tests():
    # Connect, create tables
    engine, Session = get_empty_db()

    # Fill DB
    ssn = Session()
    for entities_list in content_samples():
        ssn.add_all(entities_list)
        ssn.commit()
    ssn.close()

    # Done
    return engine, Session
