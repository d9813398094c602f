from .aggregation import Aggregator as Aggregator
from .aggregation import MetricSummary as MetricSummary
from .digest import TDigest as TDigest
from .errors import PerfgateError as PerfgateError
from .errors import SampleStreamError as SampleStreamError
from .errors import SummaryWriteError as SummaryWriteError
from .records import RecordReader as RecordReader
from .records import SampleRecord as SampleRecord
from .runner import AnalysisRunner as AnalysisRunner
from .slo import SLOConfig as SLOConfig
from .slo import evaluate as evaluate
from .summary import SummaryAssembler as SummaryAssembler
from .trends import HistoryStore as HistoryStore
from .trends import compute_delta as compute_delta
