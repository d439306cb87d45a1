# eventhub/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships

from eventhub.db.base_class import Base
from eventhub.models.profile import Profile
from eventhub.models.event import Event
from eventhub.models.registration import Registration
from eventhub.models.cron_log import CronLog
from eventhub.models.verified_member import VerifiedMember
