# delegaciones/core/config.py
from typing import List, Literal, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === App ===
    app_name: str = Field("Gestión DNP", validation_alias="APP_NAME")
    app_version: str = Field("1.0.0", validation_alias="APP_VERSION")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # === Sesión fija (sin autenticación) ===
    current_user_name: str = Field("Albert Buitrago", validation_alias="CURRENT_USER_NAME")
    current_user_role: Literal["Admin", "User"] = Field("Admin", validation_alias="CURRENT_USER_ROLE")

    # === Alertas de vencimiento ===
    overdue_check_interval: float = Field(60.0, gt=0, validation_alias="OVERDUE_CHECK_INTERVAL")
    notifications_buffer: int = Field(200, ge=1, validation_alias="NOTIFICATIONS_BUFFER")

    # === Exportación ===
    export_dir: str = Field("exports", validation_alias="EXPORT_DIR")

    # === Rate limit de solicitudes ===
    create_rate_limit: str = Field("30/minute", validation_alias="CREATE_RATE_LIMIT")
    rate_limit_enabled: bool = Field(True, validation_alias="RATE_LIMIT_ENABLED")

    # === CORS ===
    # Acepta JSON (["http://a","https://b"]) o lista separada por comas ("http://a,https://b")
    cors_origins: Union[List[str], str] = Field(default_factory=list, validation_alias="CORS_ORIGINS")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    data = json.loads(s)
                    if isinstance(data, list):
                        return [str(x).strip() for x in data if str(x).strip()]
                except ValueError:
                    # JSON mal formado: caemos al split por comas
                    pass
            return [item.strip() for item in s.split(",") if item.strip()]
        return [str(v).strip()] if str(v).strip() else []


# Instancia global usada por main.py y las rutas
settings = Settings()
