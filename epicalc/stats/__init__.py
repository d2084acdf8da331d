"""Normal approximation, significance and sample size helpers."""

from epicalc.stats.normal import normal_cdf
from epicalc.stats.sample_size import required_sample_size
from epicalc.stats.significance import two_tailed_p_value

__all__ = ["normal_cdf", "required_sample_size", "two_tailed_p_value"]
