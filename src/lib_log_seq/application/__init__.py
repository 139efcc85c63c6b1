"""Application layer: ports shared by the forwarder and its host bindings."""
