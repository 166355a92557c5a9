from app.services.mapping.group_schema import GroupSchema

# Backend record keys of the sections. The create endpoint expects the camelCase keys, stored
# records come back with the snake_case ones.
SECTION_KEYS = {
    "evaluacionConsulta": ("evaluacionConsulta", "evaluacion_consulta"),
    "antecedentes": ("antecedentes",),
    "anamnesisSistemica": ("anamnesisSistemica", "anamnesis_sistemica"),
    "examenFisico": ("examenFisico", "examen_fisico"),
    "diagnosticoFuncional": ("diagnosticoFuncional", "diagnostico_funcional"),
}

FISIATRIC_HISTORY_SCHEMA = GroupSchema.from_table(
    name="hc-fisiatric",
    version=1,
    table=[
        (
            "EVALUACIÓN DE LA CONSULTA",
            "evaluacionConsulta",
            [
                ("derivadosPor", "derivados-por"),
                ("medicacionActual", "medicacion-actual"),
                ("antecedentesCuadro", "antecedentes-cuadro"),
                ("estudiosRealizados", "estudios-realizados"),
            ],
        ),
        (
            "ANTECEDENTES",
            "antecedentes",
            [
                ("hereditarios", "antecedentes-hereditarios"),
                ("patologicos", "antecedentes-patologicos"),
                ("quirurgicos", "antecedentes-quirurgicos"),
                ("metabolicos", "antecedentes-metabolicos"),
                ("inmunologicos", "antecedentes-inmunologicos"),
            ],
        ),
        (
            "DATOS FISIOLÓGICOS",
            "antecedentes.fisiologico",
            [
                ("dormir", "fisiologicos-dormir"),
                ("alimentacion", "fisiologicos-alimentacion"),
                ("catarsis", "fisiologicos-catarsis"),
                ("diuresis", "fisiologicos-diuresis"),
                ("periodoMenstrual", "fisiologicos-periodo-menstrual"),
                ("sexualidad", "fisiologicos-sexualidad"),
            ],
        ),
        (
            "ANAMNESIS SISTÉMICA",
            "anamnesisSistemica",
            [
                ("comunicacion", "anamnesis-comunicacion"),
                ("motricidad", "anamnesis-motricidad"),
                ("vidaDiaria", "anamnesis-vida-diaria"),
            ],
        ),
        (
            "EXAMEN FÍSICO - GENERAL",
            "examenFisico.general",
            [
                ("actitud", "examen-actitud"),
                ("comunicacionCodigos", "examen-comunicacion-codigos"),
                ("pielFaneras", "examen-piel-faneras"),
            ],
        ),
        (
            "EXAMEN FÍSICO - CABEZA Y SENTIDOS",
            "examenFisico.cabezaSentidos",
            [
                ("cabeza", "examen-cabeza"),
                ("ojos", "examen-ojos"),
                ("movimientosAnormales", "examen-movimientos-anormales"),
                ("estrabismo", "examen-estrabismo"),
                ("orejas", "examen-orejas"),
                ("audicion", "examen-audicion"),
                ("boca", "examen-boca"),
                ("labios", "examen-labios"),
                ("lengua", "examen-lengua"),
                ("denticion", "examen-denticion"),
                ("mordida", "examen-mordida"),
                ("paladarVelo", "examen-paladar-velo"),
                ("maxilares", "examen-maxilares"),
            ],
        ),
        (
            "EXAMEN FÍSICO - TRONCO Y EXTREMIDADES",
            "examenFisico.troncoExtremidades",
            [
                ("torax", "examen-torax"),
                ("abdomen", "examen-abdomen"),
                ("columnaVertebral", "examen-columna-vertebral"),
                ("pelvis", "examen-pelvis"),
                ("caderas", "examen-caderas"),
                ("mmii", "examen-mmii"),
                ("pies", "examen-pies"),
                ("mmss", "examen-mmss"),
                ("manos", "examen-manos"),
                ("lateralidad", "examen-lateralidad"),
            ],
        ),
        (
            "EXAMEN FÍSICO - SISTEMAS Y ACTIVIDADES",
            "examenFisico.sistemaActividades",
            [
                ("apRespiratorio", "examen-ap-respiratorio"),
                ("apCardiovascular", "examen-ap-cardiovascular"),
                ("apDigestivo", "examen-ap-digestivo"),
                ("actividadRefleja", "examen-actividad-refleja"),
                ("actividadSensoperceptual", "examen-actividad-sensoperceptual"),
                ("reaccionesPosturales", "examen-reacciones-posturales"),
                ("desplazamientoMarcha", "examen-desplazamiento-marcha"),
                ("etapaDesarrollo", "examen-etapa-desarrollo"),
            ],
        ),
        (
            "DIAGNÓSTICO FUNCIONAL",
            "diagnosticoFuncional",
            [
                ("diagnosticoFuncional", "diagnostico-funcional"),
                ("objetivosFamilia", "objetivos-familia"),
            ],
        ),
        (
            "CONDUCTA A SEGUIR",
            "diagnosticoFuncional",
            [
                ("conductaSeguir", "conducta-objetivos"),
            ],
        ),
    ],
)
