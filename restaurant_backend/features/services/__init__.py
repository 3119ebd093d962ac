from .flags import FeatureFlagStore, get_flag_store, is_feature_enabled

__all__ = ["FeatureFlagStore", "get_flag_store", "is_feature_enabled"]
