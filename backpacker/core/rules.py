from __future__ import annotations

from backpacker.api.models import Location

INITIAL_MONEY = 5000
COST_PER_KM = 0.25
EARTH_RADIUS_KM = 6371.0

REWARD_PER_CORRECT_ANSWER = 100
PITY_PAYMENT = 100

PLANE_MIN_KM = 2000
TRAIN_MIN_KM = 500

DESTINATION_COUNT = 8
JOB_CANDIDATES_PER_ATTEMPT = 8
MAX_JOBS = 5
MAX_JOB_ATTEMPTS = 3
QUIZ_QUESTION_COUNT = 10

CIRCUMNAVIGATION_DEGREES = 360.0

STARTING_CITIES: tuple[Location, ...] = (
    Location(city="New York", country="USA", latitude=40.7128, longitude=-74.0060),
    Location(city="London", country="UK", latitude=51.5074, longitude=-0.1278),
    Location(city="Tokyo", country="Japan", latitude=35.6895, longitude=139.6917),
    Location(city="Sydney", country="Australia", latitude=-33.8688, longitude=151.2093),
    Location(city="Linköping", country="Sweden", latitude=58.4108, longitude=15.6214),
    Location(city="Rio de Janeiro", country="Brazil", latitude=-22.9068, longitude=-43.1729),
)
