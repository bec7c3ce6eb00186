class KineAmigoError(Exception):
    """Base exception for the backend functions."""


class FirebaseInitError(KineAmigoError):
    """Exception raised when the Firebase Admin SDK cannot be initialized."""

    def __init__(self, message: str):
        super().__init__(f"Could not initialize Firebase: {message}")


class PlanSyncError(KineAmigoError):
    """Exception raised when a user's plan fields cannot be written."""

    def __init__(self, user_id: str, message: str):
        self.user_id = user_id
        super().__init__(f"Failed to update plan for user '{user_id}': {message}")


class AppointmentSweepError(KineAmigoError):
    """Exception raised when expired appointments cannot be cancelled."""

    def __init__(self, message: str):
        super().__init__(f"Expired appointment sweep failed: {message}")
