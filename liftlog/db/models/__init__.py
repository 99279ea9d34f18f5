"""SQLAlchemy model package.

Import model modules here as they are added so Alembic autogenerate
and ``Base.metadata.create_all`` can discover them via metadata.
"""

from liftlog.db.models.user import User  # noqa: F401
from liftlog.db.models.workout import Workout  # noqa: F401
from liftlog.db.models.exercise import Exercise  # noqa: F401
from liftlog.db.models.workout_set import WorkoutSet  # noqa: F401
