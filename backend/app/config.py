from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Mars Real Estate"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Mars real-estate web service
    mars_api_base_url: str = "https://android-kotlin-fun-mars-server.appspot.com"
    mars_api_timeout_seconds: float = 30.0
    # Serve the built-in sample listings instead of calling the web service
    use_mock_listings: bool = False

    cors_origins: str = "http://localhost:5173"

    model_config = {"env_file": ".env"}


settings = Settings()
