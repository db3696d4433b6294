# over-representation is tested with the upper tail: P(X >= k),
# under-representation with the lower tail: P(X <= k)
REPRESENTATIONS = ('over', 'under')

DEFAULT_ADJUSTMENT = 'fdr_bh'

# categories smaller or larger than these are not tested;
# None means that there is no upper limit
DEFAULT_MIN_SIZE = 1
DEFAULT_MAX_SIZE = None

# significance level used when filtering results
DEFAULT_ALPHA = 0.05
