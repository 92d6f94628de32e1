# usbest/db/base.py
from usbest.db.base_class import Base  # noqa: F401

# Import every module that defines tables so Base.metadata sees them
from usbest.models import profile  # noqa: F401
from usbest.models import content  # noqa: F401
from usbest.models import engagement  # noqa: F401
from usbest.models import survey_response  # noqa: F401
