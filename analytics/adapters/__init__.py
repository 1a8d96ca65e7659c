"""Adapters that turn raw channel statistics into engine input models."""

from analytics.adapters.channel_adapter import ChannelAdapter, load_channel_directory

__all__ = ["ChannelAdapter", "load_channel_directory"]
