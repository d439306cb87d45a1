# eventhub/crud/__init__.py

from .crud_cron_log import cron_log
from .crud_event import event
from .crud_profile import profile
from .crud_registration import registration
from .crud_verified_member import verified_member
