# 8. dash_app.py
import base64
import io
import os

import dash
import pandas as pd
import plotly.express as px
from dash import Dash, dcc, html, Input, Output, State, dash_table
from sklearn.decomposition import PCA

from preprocess import HEALTH_COLUMNS, clean_and_preprocess
from correlation import habit_health_correlations, health_by_genre
from cluster import K_RANGE, cluster_profiles, label_profiles, select_k, train_kmeans

app = Dash(__name__, external_stylesheets=["https://cdn.jsdelivr.net/npm/bootstrap@5.1.3/dist/css/bootstrap.min.css"])
app.title = 'Music & Mental Health Profiles'

server = app.server

# Global state
store = {
    "df": None,
    "X_scaled": None,
    "elbow": None,
    "silhouette": None,
    "best_k": None,
    "labels": None,
    "profiles": None,
}


def parse_upload(contents):
    _, content_string = contents.split(',')
    decoded = base64.b64decode(content_string)
    try:
        text = decoded.decode('utf-8')
    except UnicodeDecodeError:
        text = decoded.decode('ISO-8859-1')
    df = pd.read_csv(io.StringIO(text))
    df.columns = [str(col).strip() for col in df.columns]
    return df


def process_survey(df):
    df_clean, X_scaled, _, _ = clean_and_preprocess(df)
    best_k, elbow, sil = select_k(X_scaled, K_RANGE)
    # profiles are fitted by update_profiles once the slider takes best_k
    store.update(df=df_clean, X_scaled=X_scaled, elbow=elbow, silhouette=sil, best_k=best_k,
                 labels=None, profiles=None)
    return best_k


def max_k():
    # KMeans needs fewer clusters than respondents
    return max(K_RANGE.start, min(K_RANGE.stop - 1, len(store['df']) - 1))


def apply_k(k):
    _, labels, score = train_kmeans(store['X_scaled'], k=k)
    profiles = cluster_profiles(store['df'], labels)
    profiles['Profile'] = label_profiles(profiles)
    store['labels'] = labels
    store['profiles'] = profiles
    return score


def get_chart_figure(chart_type):
    df = store['df']
    if df is None or store['labels'] is None:
        return {}

    if chart_type == 'heatmap':
        corr = habit_health_correlations(df, method='spearman')
        return px.imshow(corr, text_auto='.2f', color_continuous_scale='RdBu_r', zmin=-1, zmax=1,
                         aspect='auto', title='Listening Habits vs Mental Health (Spearman)')
    elif chart_type == 'genre':
        summary = health_by_genre(df).reset_index()
        return px.bar(summary, x='Fav genre', y=HEALTH_COLUMNS, barmode='group',
                      title='Mean Mental-Health Scores by Favourite Genre')
    elif chart_type == 'elbow':
        return px.line(x=list(store['elbow']), y=list(store['elbow'].values()), markers=True,
                       labels={'x': 'Number of Clusters (k)', 'y': 'Inertia'}, title='Elbow Method')
    elif chart_type == 'silhouette':
        return px.line(x=list(store['silhouette']), y=list(store['silhouette'].values()), markers=True,
                       labels={'x': 'Number of Clusters (k)', 'y': 'Silhouette Score'},
                       title='Silhouette Score by Number of Clusters')
    elif chart_type == 'scatter':
        coords = PCA(n_components=2).fit_transform(store['X_scaled'])
        return px.scatter(x=coords[:, 0], y=coords[:, 1], color=store['labels'].astype(str),
                          labels={'x': 'PC1', 'y': 'PC2', 'color': 'Cluster'}, title='Listener Profiles (PCA)')
    elif chart_type == 'profiles':
        profiles = store['profiles'].reset_index()
        profiles['Cluster'] = profiles['Cluster'].astype(str)
        return px.bar(profiles, x='Cluster', y=HEALTH_COLUMNS, barmode='group',
                      title='Mental-Health Scores by Listener Profile')
    return {}


app.layout = html.Div([
    dcc.Download(id="download-table"),

    html.Div([
        html.H1("Music & Mental Health Dashboard", className="text-center text-primary mb-4"),

        html.Div([
            html.H3("1. Upload Survey CSV", className="text-secondary"),
            dcc.Upload(
                id='upload-data',
                children=html.Div(['Drag and Drop or ', html.A('Select File')]),
                style={
                    'width': '100%', 'height': '60px', 'lineHeight': '60px',
                    'borderWidth': '2px', 'borderStyle': 'dashed', 'borderRadius': '10px',
                    'textAlign': 'center', 'marginBottom': '20px'
                },
                multiple=False
            ),
            html.Div(id='file-upload-output', className="mb-4"),
        ]),

        html.H3("2. Number of Profiles", className="text-secondary"),
        dcc.Slider(id='k-slider', min=K_RANGE.start, max=K_RANGE.stop - 1, step=1, value=4,
                   marks={k: str(k) for k in K_RANGE}),
        html.Div(id='model-metrics', className="text-muted mb-4"),

        html.H3("3. Visualizations", className="text-secondary"),
        dcc.Tabs(id='charts-tabs', value='heatmap', children=[
            dcc.Tab(label='Correlation Heatmap', value='heatmap'),
            dcc.Tab(label='Health by Genre', value='genre'),
            dcc.Tab(label='Elbow', value='elbow'),
            dcc.Tab(label='Silhouette', value='silhouette'),
            dcc.Tab(label='Profile Scatter', value='scatter'),
            dcc.Tab(label='Profile Summary', value='profiles')
        ]),
        dcc.Graph(id='cluster-plot'),

        html.H3("4. Listener Profiles", className="text-secondary mt-4"),
        dash_table.DataTable(id='profile-table', style_table={'overflowX': 'auto'}),
        html.Button('Download Labelled Respondents', id='download-table-btn', className="btn btn-outline-success mt-2"),
    ], className="container")
])


@app.callback(
    Output('file-upload-output', 'children'),
    Output('k-slider', 'value'),
    Output('k-slider', 'max'),
    Input('upload-data', 'contents'),
    State('upload-data', 'filename')
)
def handle_upload(contents, filename):
    if contents is None:
        return "No file uploaded", dash.no_update, dash.no_update
    try:
        best_k = process_survey(parse_upload(contents))
    except ValueError as e:
        return f"Could not process '{filename}': {e}", dash.no_update, dash.no_update
    return f"Processed '{filename}' ({len(store['df'])} respondents)", best_k, max_k()


@app.callback(
    Output('model-metrics', 'children'),
    Output('profile-table', 'data'),
    Output('profile-table', 'columns'),
    Input('k-slider', 'value'),
    Input('file-upload-output', 'children')
)
def update_profiles(k, _):
    if store['df'] is None or k is None:
        return "", [], []
    try:
        score = apply_k(k)
    except ValueError as e:
        return f"Could not fit k={k}: {e}", [], []
    table = store['profiles'].round(2).reset_index()
    columns = [{'name': i, 'id': i} for i in table.columns]
    metrics = f"k={k} (silhouette suggests k={store['best_k']}) | Silhouette Score: {score:.2f}"
    return metrics, table.to_dict('records'), columns


@app.callback(
    Output('cluster-plot', 'figure'),
    Input('charts-tabs', 'value'),
    Input('model-metrics', 'children')
)
def update_chart(chart_type, _):
    return get_chart_figure(chart_type)


@app.callback(
    Output("download-table", "data"),
    Input("download-table-btn", "n_clicks"),
    prevent_initial_call=True
)
def trigger_csv_download(n_clicks):
    if store['df'] is not None:
        labelled = store['df'].assign(Cluster=store['labels'])
        return dcc.send_data_frame(labelled.to_csv, "respondents_with_profiles.csv", index=False)
    return dash.no_update


# Run Server: Render
if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8050))
    app.run(host="0.0.0.0", port=port, debug=False)
