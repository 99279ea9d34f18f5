from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from liftlog.auth.provider import BearerTokenAuthProvider
from liftlog.core.errors import ProfileIncomplete, StorageUnavailable, Unauthenticated
from liftlog.db.models.user import User
from liftlog.services.identity import IdentityResolver, derive_display_name
from tests.base import BackendTestBase, FakeAuthProvider, RecordingSessionFactory, make_profile


class StaleLookupResolver(IdentityResolver):
    """Misses the user on the first lookup, as a request racing another one would."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lookups = 0

    async def _find_user_id(self, db, external_id):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return await super()._find_user_id(db, external_id)


class DisplayNameTests(BackendTestBase):
    async def test_display_name_precedence(self):
        self._info("Checks first/last name, then email local part, then the 'User' fallback.")
        cases = [
            ((None, None, "a@b.com"), "a"),
            (("Jane", None, "jane@b.com"), "Jane"),
            (("  Jane ", " Doe ", "jane@b.com"), "Jane Doe"),
            (("   ", "Doe", "x@y.com"), "Doe"),
            (("   ", None, "x@y.com"), "x"),
            ((None, "Doe", "x@y.com"), "x"),
            ((None, None, "@b.com"), "User"),
            ((None, None, None), "User"),
        ]
        for args, expected in cases:
            with self.subTest(args=args):
                self.assertEqual(derive_display_name(*args), expected)
        self._pass("display names derived", "ok")


class IdentityResolverTests(BackendTestBase):
    async def test_first_resolution_provisions_once(self):
        self._info("Checks the first call inserts the user and later calls are pure reads.")
        auth = FakeAuthProvider("ext_1", make_profile("a@b.com"))
        resolver = self._resolver(auth)

        first = await resolver.resolve_current_user_id()
        second = await resolver.resolve_current_user_id()

        self.assertEqual(first, second)
        self.assertEqual(await self._count(User), 1)
        self.assertEqual(auth.profile_calls, 1)

        async with self.session_factory() as db:
            user = (await db.execute(select(User).where(User.id == first))).scalar_one()
        self.assertEqual(user.external_id, "ext_1")
        self.assertEqual(user.email, "a@b.com")
        self.assertEqual(user.name, "a")
        self._pass("one row, same id twice", {"first": first, "second": second})

    async def test_existing_user_skips_profile_fetch(self):
        user_id = await self._seed_user("ext_known", "known@b.com")
        auth = FakeAuthProvider("ext_known", None)

        self.assertEqual(await self._resolver(auth).resolve_current_user_id(), user_id)
        self.assertEqual(auth.profile_calls, 0)

    async def test_first_name_only_profile(self):
        auth = FakeAuthProvider("ext_jane", make_profile("jane.d@b.com", first_name="Jane"))
        user_id = await self._resolver(auth).resolve_current_user_id()

        async with self.session_factory() as db:
            name = (await db.execute(select(User.name).where(User.id == user_id))).scalar_one()
        self.assertEqual(name, "Jane")

    async def test_no_principal_is_unauthenticated_without_storage(self):
        self._info("Checks a missing session fails before any session is opened.")
        factory = RecordingSessionFactory()
        resolver = self._resolver(FakeAuthProvider(None), session_factory=factory)

        with self.assertRaises(Unauthenticated):
            await resolver.resolve_current_user_id()
        self.assertEqual(factory.calls, 0)
        self._pass("Unauthenticated, zero storage calls", factory.calls)

    async def test_profile_gone_before_provisioning(self):
        auth = FakeAuthProvider("ext_gone", None)
        with self.assertRaises(Unauthenticated):
            await self._resolver(auth).resolve_current_user_id()
        self.assertEqual(await self._count(User), 0)

    async def test_profile_without_email(self):
        auth = FakeAuthProvider("ext_no_mail", make_profile(None, first_name="Jane"))
        with self.assertRaises(ProfileIncomplete) as ctx:
            await self._resolver(auth).resolve_current_user_id()
        self.assertNotIsInstance(ctx.exception, Unauthenticated)
        self.assertEqual(await self._count(User), 0)

    async def test_unusable_email_is_rejected_before_insert(self):
        self._info("Checks an email without a valid domain is refused and no row is written.")
        for email in ["lifter@localhost", "not-an-email"]:
            with self.subTest(email=email):
                auth = FakeAuthProvider(f"ext_{email}", make_profile(email))
                with self.assertRaises(ProfileIncomplete):
                    await self._resolver(auth).resolve_current_user_id()
        self.assertEqual(await self._count(User), 0)

    async def test_concurrent_provisioning_race_reuses_existing_row(self):
        self._info("Checks a uniqueness conflict on first insert falls back to one more lookup.")
        existing_id = await self._seed_user("ext_race", "race@b.com", name="race")
        auth = FakeAuthProvider("ext_race", make_profile("race@b.com"))
        resolver = StaleLookupResolver(self.session_factory, auth)

        resolved = await resolver.resolve_current_user_id()

        self.assertEqual(resolved, existing_id)
        self.assertEqual(resolver.lookups, 2)
        self.assertEqual(await self._count(User), 1)
        self._pass("race resolved to existing row", {"existing": existing_id, "resolved": resolved})

    async def test_email_owned_by_other_identity_surfaces_storage_error(self):
        await self._seed_user("ext_owner", "shared@b.com")
        auth = FakeAuthProvider("ext_other", make_profile("shared@b.com"))

        with self.assertRaises(StorageUnavailable):
            await self._resolver(auth).resolve_current_user_id()
        self.assertEqual(await self._count(User), 1)

    async def test_unreachable_database_surfaces_storage_error(self):
        engine = create_async_engine(f"sqlite+aiosqlite:///{self._tmpdir.name}/missing/dir/liftlog.db")
        self.addAsyncCleanup(engine.dispose)
        resolver = self._resolver(
            FakeAuthProvider("ext_1", make_profile("a@b.com")),
            session_factory=async_sessionmaker(engine),
        )

        with self.assertRaises(StorageUnavailable):
            await resolver.resolve_current_user_id()


class BearerTokenAuthProviderTests(BackendTestBase):
    async def test_token_claims_feed_provisioning(self):
        token = self._token("ext_token", email="jane@b.com", given_name="Jane", family_name="Doe")
        auth = BearerTokenAuthProvider(token)

        self.assertEqual(await auth.get_principal_id(), "ext_token")
        profile = await auth.get_profile()
        self.assertEqual(profile.primary_email(), "jane@b.com")

        user_id = await self._resolver(auth).resolve_current_user_id()
        async with self.session_factory() as db:
            name = (await db.execute(select(User.name).where(User.id == user_id))).scalar_one()
        self.assertEqual(name, "Jane Doe")

    async def test_missing_bad_or_expired_token_has_no_principal(self):
        expired = self._token("ext_old", email="old@b.com", expires_minutes=-5)
        for token in [None, "", "not-a-jwt", expired]:
            with self.subTest(token=token):
                auth = BearerTokenAuthProvider(token)
                self.assertIsNone(await auth.get_principal_id())
                self.assertIsNone(await auth.get_profile())
