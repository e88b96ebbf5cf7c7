"""Widget configuration models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WidgetTheme(CamelModel):
    primary_color: str = "#667eea"
    secondary_color: str = "#764ba2"
    text_color: str = "#333333"
    background_color: str = "#ffffff"


class WidgetFeatures(CamelModel):
    typing: bool = True
    sound: bool = False
    emoji: bool = True
    file_upload: bool = False


class WidgetConfig(CamelModel):
    """Display settings served to the embed loader."""

    title: str = "Chat with us!"
    welcome_message: str = "Hi! How can I help you today?"
    placeholder: str = "Type a message..."
    position: str = "bottom-right"
    theme: WidgetTheme = Field(default_factory=WidgetTheme)
    features: WidgetFeatures = Field(default_factory=WidgetFeatures)


class WidgetConfigResponse(CamelModel):
    success: bool = True
    config: WidgetConfig
    config_id: str
