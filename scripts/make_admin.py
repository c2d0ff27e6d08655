"""Grant the admin role to a registered identity: python scripts/make_admin.py EMAIL"""
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from portal import create_app
from portal.errors import PortalError
from portal.services import bootstrap_admin

if len(sys.argv) != 2:
    print(__doc__)
    sys.exit(2)

app = create_app()

with app.app_context():
    try:
        bootstrap_admin(sys.argv[1])
    except PortalError as e:
        print(e.user_message)
        sys.exit(1)
    print(f"{sys.argv[1]} is now an admin")
