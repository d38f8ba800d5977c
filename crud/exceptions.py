class SlotUnavailableError(ValueError):
    """The requested (date, time) slot already holds a pending or confirmed appointment."""

    def __init__(self, date: str, time: str):
        self.date = date
        self.time = time
        super().__init__(
            "La fecha y hora seleccionadas ya no están disponibles. Por favor elige otro horario."
        )


class TestimonialExistsError(ValueError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("Ya has dejado un testimonio anteriormente")


class EmailAlreadyRegisteredError(ValueError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"An account already exists for {email}")


class InvalidCredentialsError(ValueError):
    pass


class InvalidObjectIdError(ValueError):
    pass
