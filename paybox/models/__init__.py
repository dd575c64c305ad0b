from paybox.models.announcement import SystemUpdateModel, UpdateViewModel  # noqa: F401
from paybox.models.category import CategoryModel  # noqa: F401
from paybox.models.payment import PaymentModel  # noqa: F401
from paybox.models.trailer import LookupEntityModel, TrailerServiceModel  # noqa: F401
from paybox.models.user_profile import UserProfileModel  # noqa: F401
