# Importing the models here registers them on Base.metadata so that
# relationships resolve and create_all sees every table.

from .episode import Episode
from .generation_request import GenerationRequest
