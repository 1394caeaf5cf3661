# Import moved models
from domain.models.song import Song
