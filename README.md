# otlpmapping

Helpers for turning OpenTelemetry (OTLP) data into the shapes a Datadog-style
backend expects. Attribute maps are plain Python dictionaries from keys to
`str`, `bool`, `int`, `float`, `bytes`, lists or nested dictionaries.

## What is in the package

- **Sources and hostnames**: `otlpmapping.hostname.source_from_attrs` works out
  where telemetry came from. It returns a `otlpmapping.source.Source` of kind
  `Kind.HOSTNAME` or `Kind.AWS_ECS_FARGATE`, or `None`.
  `hostname_from_attributes` and `get_cluster_name` are also there. The
  hostname is taken from the first of these that is present: the literal
  `host` attribute, `datadog.host.name`, the cloud provider rules in
  `otlpmapping.ec2`, `otlpmapping.gcp` and `otlpmapping.azure`, the Kubernetes
  node (and cluster) name, `host.id` and `host.name`. Localhost-like names are
  discarded.
- **Tags**: `otlpmapping.attributes.tags_from_attributes` builds Datadog tags
  from a selected set of attributes. `origin_id_from_attributes` and
  `container_tag_from_attributes` are in the same module, along with
  `as_string` and `value_type_name` for attribute values. The process and OS
  tag rules are in `otlpmapping.resource_tags`.
- **Logs**: `otlpmapping.logs.transform(lr, res, logger=None)` turns a
  `LogRecord` and its resource attributes into an `HTTPLogItem`. It sets the
  hostname, service, status, trace and span ids, timestamps and `ddtags`.
  `HTTPLogItem.to_dict()` gives the JSON form.
- **Metric settings and dimensions**: `otlpmapping.metrics` has
  `TranslatorConfig` with the `with_*` option functions (applied with
  `TranslatorConfig.apply`), the `HistogramMode`, `NumberMode` and
  `InitialCumulMonoValueMode` enums, `DataType` with `parse_data_type`, and the
  `TimeSeriesConsumer`, `HostConsumer` and `TagsConsumer` interfaces. It also
  has the immutable `Dimensions`, which identifies a timeseries.
  `Dimensions.key()` does not depend on tag order.
- **Host metadata**: `otlpmapping.hostmap.HostMap` merges resource attributes
  into `otlpmapping.payload.HostMetadata` payloads. The gohai platform data
  lives in `otlpmapping.gohai` and is encoded as a JSON string. When a field
  has the wrong type, `HostMap.update` still stores the update and then raises
  `HostMapUpdateError`. `HostMap.flush` returns the payloads and clears them.
- **Reporting**: `otlpmapping.reporter.Reporter(logger, pusher, period)` takes
  resources through `consume_resource`. A resource is used only when its
  `datadog.host.use_as_metadata` attribute is `True`. Every `period` seconds,
  `run()` sends each flushed payload to your `Pusher.push`, and it keeps
  running until `stop()` is called. A failed push is logged and does not stop
  the reporter.
- **Test distributions**: `otlpmapping.sketchtest` gives quantile functions and
  CDFs for the uniform, U-quadratic, exponential and normal distributions, and
  for truncated versions of them.

## Example

```python
from otlpmapping.hostname import source_from_attrs

src = source_from_attrs({
    "cloud.provider": "aws",
    "host.id": "i-0123456789",
    "host.name": "ip-10-0-0-1.ec2.internal",
})
print(src.tag())  # host:i-0123456789
```

## Third-party licence listing

The `otlpmapping-licenses` command writes a CSV of dependencies, licences and
copyright notices for Go modules in a checkout. For each module it runs
`go mod vendor` and then `wwhrd list`. It reads the copyright notices from the
vendored files and removes the vendored copy afterwards. Both `go` and `wwhrd`
must be on the `PATH`. Run it from the root of the checkout:

```
otlpmapping-licenses
```

Options:

- `--output`: the CSV file to write. The default is `LICENSE-3rdparty.csv`.
- `--overrides`: a YAML file of copyright overrides. The default is
  `.copyright-overrides.yml`, and the file must exist.
- Module directories can be given as arguments. Without them a built-in list
  is used.

## What the package does not do

- It does not translate OTLP metric data points into timeseries or sketches.
  `otlpmapping.metrics` only provides the settings, consumer interfaces and
  dimensions.
- It does not send anything over the network. Delivering host metadata is up
  to the `Pusher` you provide.

## Installation and tests

```
pip install -e .[test]
pytest
```