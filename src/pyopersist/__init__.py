from . import _ops as ops
from ._adapters import (
    BagAdapter,
    BulkBuilder,
    PersistentCollectionAdapter,
    QueueAdapter,
    SetAdapter,
    StackAdapter,
    VectorAdapter,
)
from ._collection import LazyCollection
from ._core import Config, Pipeable, get_config, set_config
from ._descriptors import BAG, QUEUE, SET, STACK, VECTOR, CollectorDescriptor
from ._errors import (
    DrainedSourceFault,
    IndexFault,
    LazyCollectionError,
    ReentrantForceError,
    UnsupportedOperationError,
    UpstreamFault,
)
from ._handle import LazyHandle
from ._pipeline import TransformPipeline
from ._results import (
    NONE,
    Err,
    NoneOption,
    Ok,
    Option,
    OptionUnwrapError,
    Result,
    ResultUnwrapError,
    Some,
)
from ._source import (
    FactoryProducer,
    IterableProducer,
    Pending,
    Producer,
    PublisherProducer,
    Realized,
    Source,
)

__all__ = [
    "BAG",
    "NONE",
    "QUEUE",
    "SET",
    "STACK",
    "VECTOR",
    "BagAdapter",
    "BulkBuilder",
    "CollectorDescriptor",
    "Config",
    "DrainedSourceFault",
    "Err",
    "FactoryProducer",
    "IndexFault",
    "IterableProducer",
    "LazyCollection",
    "LazyCollectionError",
    "LazyHandle",
    "NoneOption",
    "Ok",
    "Option",
    "OptionUnwrapError",
    "Pending",
    "PersistentCollectionAdapter",
    "Pipeable",
    "Producer",
    "PublisherProducer",
    "QueueAdapter",
    "Realized",
    "ReentrantForceError",
    "Result",
    "ResultUnwrapError",
    "SetAdapter",
    "Some",
    "Source",
    "StackAdapter",
    "TransformPipeline",
    "UnsupportedOperationError",
    "UpstreamFault",
    "VectorAdapter",
    "get_config",
    "ops",
    "set_config",
]
