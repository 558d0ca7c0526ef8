from app.models.novel import Novel
from app.models.payment import PaymentRecord
from app.models.notifications import Notification

# add ALL models here
