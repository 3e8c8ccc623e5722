"""Script for inspecting database contents."""
import sys
from pathlib import Path
from tabulate import tabulate

# Add the project root directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from selva_app.database.session import SessionLocal, init_db
from selva_app.database.models import User, Meal, SavedRecipe, ProgressEntry
from selva_app.services.profile_store import ProfileStore, SqlKeyValueStore


def inspect_db():
    """Display users with their compact profile and activity counts."""
    init_db()
    db = SessionLocal()

    try:
        users = db.query(User).order_by(User.id).all()
        print("\n=== Users ===")
        user_data = [[u.id, u.name, u.email, u.role, u.created_at] for u in users]
        print(tabulate(user_data, headers=['ID', 'Name', 'Email', 'Role', 'Created']))

        print("\n=== Profiles ===")
        store = ProfileStore(SqlKeyValueStore(db))
        profile_data = []
        for u in users:
            p = u.profile
            quiz = store.load(u.id)
            profile_data.append([
                u.id,
                p.weight if p else None,
                p.height if p else None,
                p.goal if p else None,
                p.goal_weight if p else None,
                bool(p.quiz_completed) if p else False,
                quiz.goal.value if quiz and quiz.goal else None,
            ])
        print(tabulate(profile_data, headers=['User', 'Weight', 'Height', 'Goal', 'Goal Weight', 'Quiz Done', 'Quiz Goal']))

        print("\n=== Activity ===")
        activity = [[
            u.id,
            db.query(Meal).filter(Meal.user_id == u.id).count(),
            db.query(SavedRecipe).filter(SavedRecipe.user_id == u.id).count(),
            db.query(ProgressEntry).filter(ProgressEntry.user_id == u.id).count(),
        ] for u in users]
        print(tabulate(activity, headers=['User', 'Meals', 'Recipes', 'Weigh-ins']))

    finally:
        db.close()

if __name__ == "__main__":
    inspect_db()
