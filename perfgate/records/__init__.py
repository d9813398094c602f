from .columns import DEFAULT_COLUMNS as DEFAULT_COLUMNS
from .record_reader import RecordReader as RecordReader
from .record_reader import plan_name_from_path as plan_name_from_path
from .sample_record import UNNAMED_LABEL as UNNAMED_LABEL
from .sample_record import SampleRecord as SampleRecord
