import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from campus_connect import repo
from campus_connect.database import SessionLocal
from campus_connect.services.seeding import seed_dummy_data


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed dummy Campus Connect students")
    parser.add_argument("--n-users", type=int, default=100)
    parser.add_argument("--reset", action="store_true")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--email-domain", type=str, default="campus.example.edu")
    parser.add_argument("--password", type=str, default="campus123")
    parser.add_argument("--grant-admin", type=str, default=None, metavar="EMAIL", help="give an existing account the admin role")
    args = parser.parse_args()

    if args.grant_admin:
        user = repo.get_user_by_email(args.grant_admin.strip().lower())
        if not user:
            sys.exit(f"No account for {args.grant_admin}")
        repo.grant_role(str(user["id"]), "admin")
        print(f"Granted admin to {user['email']}")
        return

    with SessionLocal() as db:
        summary = seed_dummy_data(
            db=db,
            n_users=args.n_users,
            reset=args.reset,
            seed=args.seed,
            email_domain=args.email_domain.strip().lower(),
            password=args.password,
        )

    print("Seed completed")
    for k, v in summary.items():
        print(f"- {k}: {v}")


if __name__ == "__main__":
    main()
