import os
from importlib import resources

from jinja2 import Template


def write_xdmf(mesh, h5_filename, xdmf_filename, logger=None):
    """
    Write an XDMF file describing the HDF5 container written by
    :py:func:`tec2hdf5.io.write_mesh_hdf5`, so the mesh and its fields can be
    opened in ParaView or VisIt

    Parameters
    ----------
    mesh : tec2hdf5.mesh.Mesh
        The mesh that was written to ``h5_filename``

    h5_filename : str
        The path to the HDF5 container

    xdmf_filename : str
        The path of the XDMF file to write

    logger : logging.Logger, optional
        A logger for progress messages
    """
    if logger is not None:
        logger.info(f'Writing XDMF file: {xdmf_filename}')

    # the XDMF file refers to the container relative to its own location
    xdmf_dir = os.path.dirname(os.path.abspath(xdmf_filename))
    h5_basename = os.path.relpath(os.path.abspath(h5_filename), xdmf_dir)

    fields = []
    for field_index, field in enumerate(mesh.fields):
        name = f'field{field_index}'
        if field.label:
            name = f'{name}: {field.label}'
        fields.append({'name': name,
                       'path': f'/fields/field{field_index}/vectors'})

    template_file = resources.files('tec2hdf5') / 'templates' / \
        'xdmf_template.xml'
    xdmf_template = Template(template_file.read_text())

    xdmf_content = xdmf_template.render(
        label=mesh.label,
        num_elements=mesh.nelem,
        num_points=mesh.nvert,
        fields=fields,
        h5_basename=h5_basename,
    )

    with open(xdmf_filename, 'w') as xdmf_file:
        xdmf_file.write(xdmf_content)
