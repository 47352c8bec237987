import pytest
from flash_finder import AssociationError, HasOne, ManyToMany
from flash_finder.associations import (
    AssociationKind,
    BelongsToAssociation,
    HasManyAssociation,
    InnerAssociation,
    ManyToManyAssociation,
    SortableAssociation,
    _split_fields,
    for_model,
)
from flash_finder.associations.base import foreign_key_name, underscore

from .models import Book, Profile, Song, User


class TestNaming:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("User", "user"),
            ("BookWriter", "book_writer"),
            ("HTTPLog", "httplog"),
            ("Song2Track", "song2_track"),
        ],
    )
    def test_underscore(self, name, expected):
        assert underscore(name) == expected

    def test_foreign_key_name(self):
        assert foreign_key_name(User) == "user_id"


class TestConstraints:
    def test_has_one(self):
        user = User(id=5, name="mark")
        association = User.profile.bind(user, [])

        assert association.kind is AssociationKind.HAS_ONE
        assert association.target is Profile
        assert association.constraint() == ("user_id = ?", [5])
        assert association.skipped is False

    def test_has_one_with_custom_foreign_key(self):
        user = User(id=5, name="mark")
        association = HasOne("Profile", fk_id="owner_id").bind(user, [])

        assert association.constraint() == ("owner_id = ?", [5])

    def test_has_many_is_sortable(self):
        user = User(id=3, name="mark")
        association = User.books.bind(user, [])

        assert isinstance(association, HasManyAssociation)
        assert isinstance(association, SortableAssociation)
        assert association.multi is True
        assert association.constraint() == ("user_id = ?", [3])
        assert association.order_clause() == "title asc"

    def test_has_many_without_order(self):
        book = Book(id=1, title="Dune")
        assert Book.writers.bind(book, []).order_clause() == ""

    def test_belongs_to(self):
        book = Book(id=1, title="Dune", user_id=9)
        association = Book.user.bind(book, [])

        assert isinstance(association, BelongsToAssociation)
        assert not isinstance(association, SortableAssociation)
        assert association.multi is False
        assert association.constraint() == ("id = ?", [9])

    def test_belongs_to_with_class_target(self):
        book = Book(id=1, title="Dune", publisher_id=4)
        association = Book.publisher.bind(book, [])

        assert association.owner_column == "publisher_id"
        assert association.constraint() == ("id = ?", [4])

    def test_many_to_many(self):
        user = User(id=2, name="mark")
        association = User.songs.bind(user, [])

        assert isinstance(association, ManyToManyAssociation)
        assert association.multi is True
        assert association.order_clause() == "title desc"
        assert association.constraint() == (
            "id in (select song_id from users_songs where user_id = ?)",
            [2],
        )

    def test_many_to_many_default_join_table(self):
        user = User(id=2, name="mark")
        association = ManyToMany(Song).bind(user, [])

        condition, args = association.constraint()
        assert "from users_songs where user_id = ?" in condition
        assert args == [2]


class TestSkipped:
    def test_unsaved_owner_skips_has_kinds(self):
        user = User(name="new")
        assert User.books.bind(user, []).skipped is True
        assert User.profile.bind(user, []).skipped is True
        assert User.songs.bind(user, []).skipped is True

    def test_null_reference_skips_belongs_to(self):
        book = Book(id=1, title="Emma", publisher_id=None)
        assert Book.publisher.bind(book, []).skipped is True


class TestDiscovery:
    def test_split_fields(self):
        assert _split_fields(("books.writers", "books.publisher", " profile ")) == {
            "books": ["writers", "publisher"],
            "profile": [],
        }

    def test_split_fields_keeps_deeper_paths_intact(self):
        assert _split_fields(("books.writers.agent", "books.writers.agent")) == {
            "books": ["writers.agent"],
        }

    def test_all_associations_in_declaration_order(self):
        user = User(id=1, name="mark")
        assert [a.name for a in for_model(user)] == ["books", "profile", "songs"]

    def test_requested_associations_only(self):
        user = User(id=1, name="mark")
        associations = for_model(user, "songs", "books.writers")

        assert [a.name for a in associations] == ["books", "songs"]
        assert associations[0].inner == [InnerAssociation("books", "writers")]
        assert associations[1].inner == []

    def test_unknown_field(self):
        with pytest.raises(AssociationError, match="'reviews' is not an association"):
            for_model(Book(id=1, title="Dune"), "reviews")

    def test_unregistered_target(self):
        user = User(id=1, name="mark")
        association = HasOne("Ghost").bind(user, [])

        with pytest.raises(AssociationError, match="'Ghost' is not registered"):
            _ = association.target


class TestDescriptor:
    def test_defaults_before_loading(self):
        user = User(id=1, name="mark")
        assert user.books == []
        assert user.profile is None

    def test_assign(self):
        user = User(id=1, name="mark")
        profile = Profile(id=1, bio="hi", user_id=1)
        User.profile.bind(user, []).assign(profile)

        assert user.profile is profile

    def test_class_access_returns_declaration(self):
        assert User.books.name == "books"
        assert User.books.kind is AssociationKind.HAS_MANY
